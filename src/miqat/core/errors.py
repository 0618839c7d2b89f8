class MiqatError(Exception):
    """Base error."""

class InvalidDateError(MiqatError, ValueError):
    """Month or day outside the valid range of the calendar in use."""

class InvalidLocationError(MiqatError, ValueError):
    """Latitude, longitude or elevation outside the accepted range."""

class InvalidMethodKeyError(MiqatError, ValueError):
    """Unknown calculation method, Asr method, high-latitude rule or time format."""

class UnsupportedLocaleError(MiqatError, ValueError):
    """Locale other than 'ar' or 'en'."""

class NoSolutionError(MiqatError):
    """The sun never reaches the requested altitude at this place and date."""

class EphemerisUnavailableError(MiqatError, RuntimeError):
    """Raised when the optional JPL ephemeris stack is not installed."""
