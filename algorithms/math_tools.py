class MathTools:
    """Formulas for metrics derived from a single logged set."""

    EPL_COEFF: float = 0.0333
    EPL_MAX_REPS: int = 8

    @classmethod
    def epley_1rm(cls, weight: float, reps: int) -> float:
        """Return the estimated one-rep max using the Epley formula.

        Reps above ``EPL_MAX_REPS`` are capped, the estimate degrades quickly
        for high-rep sets.
        """
        if reps < 0:
            raise ValueError("reps must be non-negative")
        rep_term = min(reps, cls.EPL_MAX_REPS)
        return round(weight * (1 + cls.EPL_COEFF * rep_term), 2)

    @staticmethod
    def set_volume(weight: float, reps: int) -> float:
        """Training volume of one set (reps times weight)."""
        return round(weight * reps, 2)
