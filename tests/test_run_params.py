import pytest

from field_agent.models.run_params import RunParams


def test_run_params_all_optional():
	rp = RunParams()
	assert rp.target_platform is None
	assert rp.decisions is None
	assert rp.delay_scale is None


def test_run_params_normalizes_decisions():
	assert RunParams(decisions=" SEND ").decisions == "send"


def test_run_params_invalid_decisions():
	with pytest.raises(ValueError):
		RunParams(decisions="maybe")


@pytest.mark.parametrize("scale", [0, -1.5])
def test_run_params_positive_delay_scale(scale):
	with pytest.raises(ValueError):
		RunParams(delay_scale=scale)
