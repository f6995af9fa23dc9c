from sdr.ai.responder import AIResponder, determine_action

__all__ = ["AIResponder", "determine_action"]
