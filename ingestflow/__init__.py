"""Ingestflow: classify, rule-chain, persist, acknowledge.

Messages are pulled from an event source, classified by type, run through
that type's ordered rule chain to decide where they are persisted, and
then completed or abandoned on the source depending on the outcome.
"""

__version__ = "0.1.0"
__description__ = "Rule-chain driven message ingestion with exactly-once acknowledgement"

from ingestflow.core.classifier import MessageClassifier
from ingestflow.core.ingestion import IngestionLoop
from ingestflow.core.rules import ConditionalRule, DefaultRule, RuleChain, run_chain
from ingestflow.handlers.context import HandlerContext
from ingestflow.routing.fanout import FanOutPersister

__all__ = [
    "ConditionalRule",
    "DefaultRule",
    "FanOutPersister",
    "HandlerContext",
    "IngestionLoop",
    "MessageClassifier",
    "RuleChain",
    "run_chain",
    "__version__",
]
