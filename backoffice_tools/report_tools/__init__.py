from .allure_utils import (
    AllureReportProcessor,
    TestResultSummary,
    attach_html,
    attach_json,
    attach_page_state,
    attach_png,
    attach_text,
)

__all__ = [
    "AllureReportProcessor",
    "TestResultSummary",
    "attach_html",
    "attach_json",
    "attach_page_state",
    "attach_png",
    "attach_text",
]
