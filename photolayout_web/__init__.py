"""Flask web app for the photo print layout tool."""
