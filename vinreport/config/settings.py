from pydantic_settings import BaseSettings
from pydantic import Field


class Settings(BaseSettings):
    # CarSimulcast (vehicle history provider)
    CARSIMULCAST_API_KEY: str = Field(default="")
    CARSIMULCAST_API_SECRET: str = Field(default="")
    CARSIMULCAST_BASE_URL: str = Field(default="https://connect.carsimulcast.com")
    CARSIMULCAST_REPORT_TYPE: str = Field(default="carfax")

    # NHTSA free VIN decoder
    NHTSA_BASE_URL: str = Field(default="https://vpic.nhtsa.dot.gov/api/vehicles")

    # Resend (email delivery)
    RESEND_API_KEY: str = Field(default="")
    RESEND_BASE_URL: str = Field(default="https://api.resend.com")
    REPORT_FROM_EMAIL: str = Field(default="no-reply@vindata.ca")

    # Rendering
    REPORT_VERBOSE: bool = Field(default=False)  # append raw payload dump

    HTTP_TIMEOUT: float = Field(default=30.0)
    LOG_DIR: str = Field(default="logs")

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"

settings = Settings()
