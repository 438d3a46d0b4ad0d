"""HTTP API for the review scheduler."""

VERSION = "0.1.0"
