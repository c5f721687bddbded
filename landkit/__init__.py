"""Project templates, metadata, Traefik confs, deploy review, worker sync, storage settings and traffic queries."""

__version__ = "0.1.0"