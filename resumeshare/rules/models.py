from pydantic import BaseModel, Field


class ProjectRules(BaseModel):
    slug: str
    rules_version: str


class AnalyticsRules(BaseModel):
    unique_window_hours: int = Field(24, ge=1)
    timeseries_days: int = Field(30, ge=1)
    default_page_size: int = Field(50, ge=1)
    max_page_size: int = Field(500, ge=1)


class ResumesRules(BaseModel):
    default_name: str = "Untitled Resume"
    list_limit: int = Field(50, ge=1)


class UploadsRules(BaseModel):
    max_upload_bytes: int = Field(..., gt=0)
    allowlist_extensions: list[str]


class AuthRules(BaseModel):
    algorithm: str = "HS256"
    default_role: str = "user"
    admin_role: str = "admin"


class OpsRules(BaseModel):
    required_env: list[str] = []


class Rules(BaseModel):
    project: ProjectRules
    analytics: AnalyticsRules = AnalyticsRules()
    resumes: ResumesRules = ResumesRules()
    uploads: UploadsRules
    auth: AuthRules = AuthRules()
    ops: OpsRules = OpsRules()
