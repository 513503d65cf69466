"""
sensor_noise_sim.utils
----------------------
Noise analysis helpers: patch/frame SNR, variance model, photon transfer fit.
"""
