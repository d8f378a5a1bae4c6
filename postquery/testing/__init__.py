from .query_scenario import QueryScenario

__all__ = [
    "QueryScenario",
]
