"""gopathlink: link Go module sources into GOPATH/src for module-unaware tooling."""

__version__ = "0.3.0"
