"""Ingestflow persistence routing.

Rules never talk to storage directly: they hand a sink to the handler and
the handler pushes its ``SerializedRecord`` into it.  Sinks are pluggable
targets (local files, logs, memory, or anything implementing ``BaseSink``);
the ``FanOutPersister`` writes one record to several of them.
"""
