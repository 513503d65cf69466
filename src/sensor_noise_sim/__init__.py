"""
sensor_noise_sim — CCD/CMOS sensor noise simulation
===================================================
Turns a normalized 2-D irradiance image into a digitized, noisy sensor
readout, organized as:
    sensor (parameters → validation → photons → electrons → ADC)
    scenes (synthetic normalized targets) and utils (noise metrics)
"""

from .sensor.sensor_model import SensorNoiseResult, run_sensor_pipeline, simulate_sensor_noise
from .sensor.sensor_params import SensorParams, resolve_params

__all__ = [
    "SensorNoiseResult",
    "SensorParams",
    "resolve_params",
    "run_sensor_pipeline",
    "simulate_sensor_noise",
]
