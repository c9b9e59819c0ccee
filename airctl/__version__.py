"""Version information for airctl."""

__version__ = "1.0.0"
__version_info__ = (1, 0, 0)

# Release information
__author__ = "airctl Team"
__author_email__ = "team@airctl.dev"
__license__ = "MIT"
__url__ = "https://github.com/airctl/airctl"
__description__ = "Inspect and control a host's Wi-Fi interface from the command line"
