"""
Autocade - scoring core for camera-detected darts games (X01, Killer).
"""
__version__ = "0.1.0"
