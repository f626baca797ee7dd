"""pulsescore: daily strain, recovery, sleep and fitness scores from wearable exports."""

__version__ = "0.1.0"
