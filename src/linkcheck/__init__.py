"""
Link validator that walks every link reachable on a site from a start URL.
Requests each link once and reports broken links (4xx/5xx and connection failures).
"""
from linkcheck.config import ValidationConfig
from linkcheck.core import Validator
from linkcheck.report import Report

__version__ = "1.0.0"
__all__ = ["ValidationConfig", "Validator", "Report"]
