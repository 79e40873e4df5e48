"""tagship: publish a crate, tag the release, push the tag."""

__version__ = "0.1.0"
