"""Infrastructure layer: logging, filesystem, network and subprocess access."""
