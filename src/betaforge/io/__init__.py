"""Input and output: exchange parameters, raw sample sinks, reports and config files."""

from betaforge.io.exchange import ExchangeParameterTable, ExchangeParameters
from betaforge.io.sinks import BufferedFileSink, MemorySink, RawSampleSink

__all__ = [
    "ExchangeParameterTable",
    "ExchangeParameters",
    "BufferedFileSink",
    "MemorySink",
    "RawSampleSink",
]
