from pydantic import BaseModel, Field

DEFAULT_LOGO_URL = "https://upload.wikimedia.org/wikipedia/commons/e/e0/Logo_Pengadilan_Negeri_-_Mahkamah_Agung_RI.png"
DEFAULT_COURT_LOGO_URL = "https://drive.google.com/file/d/1IbJtyAL5lX7v28DE8yXp_iY-Qg4Sqza1/view?usp=sharing"


class AppSettings(BaseModel):
    """Branding shown by the visitor app and staff console."""

    logo_url: str = Field(DEFAULT_LOGO_URL, description="Legal aid office logo")
    court_logo_url: str = Field(DEFAULT_COURT_LOGO_URL, description="Court logo")
    lbh_name: str = Field("LBH NUSANTARA SEPAKAT", description="Legal aid institution name")
    court_name: str = Field("PENGADILAN NEGERI KELAS 1 B BANGKINANG", description="Court name")
    posbakum_name: str = Field(
        "POSBAKUM PADA PENGADILAN NEGERI KELAS 1 B BANGKINANG", description="Legal aid post name"
    )
