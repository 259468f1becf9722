"""pandopub command line interface."""
