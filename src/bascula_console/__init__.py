"""Operations console for the receiving and weighing stations."""

__version__ = "0.1.0"
