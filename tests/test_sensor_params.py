import pytest

from sensor_noise_sim.sensor.errors import ParameterError
from sensor_noise_sim.sensor.sensor_params import DEFAULT_PARAMS, SensorParams, resolve_params


def test_defaults_table():
    assert DEFAULT_PARAMS == {
        "pixel_size": 10.0,
        "exposure_time": 0.1,
        "quantum_efficiency": 0.7,
        "full_well_capacity": 30000.0,
        "gain": 2.0,
        "read_noise": 5.0,
        "dark_current": 0.1,
        "adc_max": 16383.0,
        "h": 6.62607015e-34,
        "c": 299792458.0,
        "wavelength": 550e-9,
    }


@pytest.mark.parametrize("partial", [None, {}])
def test_resolve_empty_gives_defaults(partial):
    p = resolve_params(partial)
    for name, value in DEFAULT_PARAMS.items():
        assert getattr(p, name) == value


def test_resolve_keeps_supplied_fields():
    p = resolve_params({"gain": 4.0, "read_noise": 0.0})
    assert p.gain == 4.0
    assert p.read_noise == 0.0
    assert p.full_well_capacity == 30000.0


def test_resolve_passes_params_record_through():
    given = SensorParams(exposure_time=2.5, seed=11)
    p = resolve_params(given)
    assert p == given


def test_resolve_stamps_image_shape():
    p = resolve_params({"gain": 3.0}, image_shape=(4, 7))
    assert p.image_shape == (4, 7)
    assert p.gain == 3.0


def test_resolve_does_not_validate_ranges():
    p = resolve_params({"quantum_efficiency": 5.0})
    assert p.quantum_efficiency == 5.0


def test_resolve_rejects_unknown_field():
    with pytest.raises(ParameterError, match="bogus"):
        resolve_params({"bogus": 1})


@pytest.mark.parametrize(
    "overrides",
    [
        {"quantum_efficiency": 0.0},
        {"quantum_efficiency": 1.5},
        {"full_well_capacity": 0.0},
        {"gain": -1.0},
        {"adc_max": 0.0},
        {"exposure_time": -0.1},
        {"read_noise": -1.0},
        {"dark_current": float("nan")},
    ],
)
def test_validate_rejects_out_of_range(overrides):
    with pytest.raises(ParameterError):
        resolve_params(overrides).validate()


def test_validate_accepts_edge_values():
    p = resolve_params({"quantum_efficiency": 1.0, "exposure_time": 0.0}).validate()
    assert p.quantum_efficiency == 1.0


def test_parameter_error_is_value_error():
    assert issubclass(ParameterError, ValueError)


def test_derived_quantities():
    p = SensorParams()
    assert p.pixel_area == pytest.approx(1e-10)
    assert p.photon_energy == pytest.approx(3.6117e-19, rel=1e-4)


@pytest.mark.parametrize("adc_max", [1000.5, float("inf")])
def test_validate_rejects_non_whole_adc_max(adc_max):
    with pytest.raises(ParameterError, match="adc_max"):
        resolve_params({"adc_max": adc_max}).validate()
