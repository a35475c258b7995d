from report_portal.services.report_aggregator import ReportAggregator, report_aggregator, format_report_date
from report_portal.services.report_service import ReportService
from report_portal.services.user_service import UserService
from report_portal.services.dummy_service import DummyDataService
