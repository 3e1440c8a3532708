"""Fatal error conditions of an interactive session."""


class ViewerError(Exception):
    """Base class for errors that end the viewer."""


class StartupError(ViewerError):
    """The terminal could not be prepared for rendering."""


class InputError(ViewerError):
    """Reading the next input event failed."""


class DisplayError(ViewerError):
    """Writing a frame to the display failed."""
