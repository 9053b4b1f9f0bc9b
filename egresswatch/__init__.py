"""egresswatch - tracks workloads talking to external DNS destinations."""

__version__ = "0.1.0"
