"""Command-line checks of the calendar and prayer-time models.

round_trip and ramadan_table need nothing beyond the package; year_plot needs
numpy and matplotlib, crossing_check numpy and scipy. The ephem subpackage
compares the solar model with JPL DE422 and needs the ephemeris extras.
"""

__all__ = ["round_trip", "ramadan_table", "year_plot", "crossing_check"]
