from .corpus import generate_session, generate_source, sample_session

__all__ = ["generate_session", "generate_source", "sample_session"]
