from .agent import AgentReply, call_foundry_agent
from .review import ReviewOutcome, parse_for_brand, run_chat, run_design_review

__all__ = [
    "AgentReply",
    "ReviewOutcome",
    "call_foundry_agent",
    "parse_for_brand",
    "run_chat",
    "run_design_review",
]
