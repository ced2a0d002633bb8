from pydantic import BaseModel
from dotenv import load_dotenv
import os
from typing import Optional

load_dotenv()

class Settings(BaseModel):
    token: Optional[str] = os.getenv("NOTION_TOKEN")
    base_url: str = os.getenv("NOTION_BASE_URL", "https://api.notion.com")
    timeout: float = float(os.getenv("NOTION_TIMEOUT", "30"))
    page_size: int = int(os.getenv("NOTION_PAGE_SIZE", "100"))

settings = Settings()
