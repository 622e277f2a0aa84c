"""스캔 서비스 API 경로 및 와이어 포맷 키 상수

필드 이름은 원격 API가 정한 값이므로 대소문자까지 그대로 유지해야 한다.
"""

# ---- 응답 문서 키 ----
ID = "Id"
STATUS = "Status"
MESSAGE = "Message"
FORMAT_PARAMS = "FormatParams"
KEY = "Key"
ITEMS = "Items"
NAME = "Name"
LATEST_EXECUTION = "LatestExecution"
USER_MESSAGE = "UserMessage"
FILE_ID = "FileId"
ACTIVE_TECHNOLOGIES = "ActiveTechnologies"
UNAUTHORIZED_ACTION = "UNAUTHORIZED_ACTION"

# ---- 요청 파라미터 키 ----
APP_ID = "AppId"
SCAN_ID = "ScanId"
SCAN_NAME = "ScanName"
EMAIL_NOTIFICATION = "EnableMailNotification"
FULLY_AUTOMATIC = "FullyAutomatic"
UPLOADED_FILE = "uploadedFile"

# ---- 리소스형(클라우드) API ----
API_SCANNER = "/api/v4/Scans/{}"
API_RESCAN = "/api/v4/Scans/{}/Execute"
API_BASIC_DETAILS = "/api/v4/Scans"
API_SCANNER_DETAILS = "/api/v4/Scans/{}/{}"
API_EXECUTION_DETAILS = "/api/v4/Scans/{}/Executions"
API_ISSUES_COUNT = "/api/v4/Issues/{}/{}"
API_FILE_UPLOAD = "/api/v4/FileUpload"
API_APPS = "/api/v4/Apps"
API_TENANT_INFO = "/api/v4/Account/TenantInfo"
API_IS_VALID_URL = "/api/v4/Scans/IsValidUrl"
API_IS_VALID_DOMAIN = "/api/v4/Scans/IsValidDomain"
API_REPORT_SECURITY_SCAN = "/api/v4/Reports/Security/Scan/{}"
API_REPORT_STATUS = "/api/v4/Reports/{}"
API_REPORT_DOWNLOAD = "/api/v4/Reports/Download/{}"
API_SERVICE_VERSION = "/assets/versions.json"

# 비준수 이슈를 (Status, Severity)로 미리 집계하는 OData 쿼리
ISSUES_COUNT_QUERY = {
    "applyPolicies": "All",
    "$filter": "Status eq 'Open' or Status eq 'InProgress' or Status eq 'Reopened'",
    "$apply": "groupby((Status,Severity),aggregate($count as N))",
}

# ---- 작업형(ASE) API ----
ASE_CREATEJOB_TEMPLATE_ID = "/api/jobs/{}/dastconfig/createjob"
ASE_UPDSCANT = "/api/jobs/{}/dastconfig/updatescant"
ASE_UPDTRAFFIC = "/api/jobs/{}/dastconfig/updatetraffic/{}"
ASE_UPDTAGENT = "/api/jobs/{}/dastconfig/updateagentserver/{}"
ASE_POSTMAN_COLLECTION = "/api/jobs/{}/dastconfig/postmancollection"
ASE_SCAN_TYPE = "/api/jobs/scantype"
ASE_GET_JOB = "/api/jobs/{}"
ASE_RUN_JOB_ACTION = "/api/jobs/{}/actions"
ASE_REPORTS = "/api/reportpacks/{}/reports"
ASE_ID_ATTRIBUTE = "id"
ASE_UPLOADED_FILE = "uploadedfile"
ASE_XSRF_TOKEN = "asc_xsrf_token"

# ---- 파일 확장자 ----
IRX_EXTENSION = ".irx"
DAST_FILE_EXTENSIONS = (".scan", ".scant", ".config")
