"""
Product Proxy Health Check Utilities
====================================

Liveness report for the proxy. Upstream is not contacted; the report only
confirms the process is serving and the upstream target is configured.
"""

import time
from typing import Any, Callable, Dict, Optional

from ..core.settings import ProxySettings


class ProxyHealthChecker:
    """Runs registered checks and summarizes them"""

    def __init__(self, service_name: str = "product-proxy", version: str = "1.0.0"):
        self.service_name = service_name
        self.version = version
        self.checks: Dict[str, Callable[[], Dict[str, Any]]] = {}
        self.start_time = time.time()

    def add_check(self, name: str, check_func: Callable[[], Dict[str, Any]]) -> None:
        """Add a health check function"""
        self.checks[name] = check_func

    def run_checks(self) -> Dict[str, Any]:
        """Run all health checks"""
        results = {}
        check_start_time = time.time()

        for name, check_func in self.checks.items():
            individual_start = time.time()
            try:
                result = check_func()
            except Exception as e:
                result = {"status": "error", "error": str(e)}
            result["duration_ms"] = round((time.time() - individual_start) * 1000, 2)
            results[name] = result

        return {
            "service": self.service_name,
            "version": self.version,
            "status": "healthy"
            if all(r.get("status") == "healthy" for r in results.values())
            else "unhealthy",
            "checks": results,
            "total_duration_ms": round((time.time() - check_start_time) * 1000, 2),
            "uptime_seconds": round(time.time() - self.start_time, 2),
            "timestamp": time.time(),
        }

    def add_proxy_checks(self, settings: ProxySettings) -> None:
        """Register the standard proxy checks"""

        def basic_check() -> Dict[str, Any]:
            return {
                "status": "healthy",
                "message": "Product Proxy is running",
                "component": "core",
            }

        def upstream_config_check() -> Dict[str, Any]:
            configured = settings.UPSTREAM_BASE_URL.startswith(("http://", "https://"))
            return {
                "status": "healthy" if configured else "unhealthy",
                "upstream": settings.UPSTREAM_BASE_URL,
                "component": "upstream",
            }

        self.add_check("basic", basic_check)
        self.add_check("upstream_config", upstream_config_check)


_health_checker: Optional[ProxyHealthChecker] = None


def get_health_checker(settings: ProxySettings) -> ProxyHealthChecker:
    """Process-wide checker so uptime counts from first use"""
    global _health_checker
    if _health_checker is None:
        _health_checker = ProxyHealthChecker(settings.SERVICE_NAME, settings.APP_VERSION)
        _health_checker.add_proxy_checks(settings)
    return _health_checker
