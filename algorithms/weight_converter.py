class WeightConverter:
    """Utility for converting between kg and lb."""

    KG_TO_LB = 2.20462
    UNITS = ("kg", "lb")

    @staticmethod
    def kg_to_lb(kg: float) -> float:
        return round(kg * WeightConverter.KG_TO_LB, 2)

    @staticmethod
    def lb_to_kg(lb: float) -> float:
        return round(lb / WeightConverter.KG_TO_LB, 2)

    @classmethod
    def convert(cls, weight: float, from_unit: str, to_unit: str) -> float:
        for unit in (from_unit, to_unit):
            if unit not in cls.UNITS:
                raise ValueError(f"unknown unit: {unit}")
        if from_unit == to_unit:
            return weight
        if from_unit == "kg":
            return cls.kg_to_lb(weight)
        return cls.lb_to_kg(weight)

    @classmethod
    def format(cls, weight: float, unit: str, stored_unit: str = "kg") -> str:
        """Render a stored weight in ``unit``, e.g. ``"135 lb"``."""
        value = cls.convert(weight, stored_unit, unit)
        return f"{value:g} {unit}"
