"""FlowTimer: a work/break interval timer that survives suspension."""

__version__ = "0.1.0"
