from .kpi_service import KPIService

__all__ = ["KPIService"]
