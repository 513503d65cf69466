"""
sensor_noise_sim.scenes
-----------------------
Synthetic irradiance targets (flat field, gradient, checkerboard), float32 in [0, 1].
"""
