from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .report.pagination import MIN_TOTAL_PAGES, PageLimits


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file='.env',
        env_file_encoding='utf-8',
        case_sensitive=False,
        extra='ignore',
        populate_by_name=True,
    )

    app_name: str = 'PolicySprint PDF Renderer'
    brand_name: str = 'PolicySprint'

    # Brand assets (first existing candidate wins)
    assets_dir: Path = Field(
        default=Path('public/branding/logo'),
        validation_alias=AliasChoices('ASSETS_DIR', 'BRAND_ASSETS_DIR'),
    )
    brand_logo_candidates: str = (
        'policysprint-mono-white.png,'
        'policysprint-horizontal.png,'
        'policysprint-mark.png'
    )

    # Page budget
    pdf_max_total_pages: int = Field(
        default=18,
        ge=MIN_TOTAL_PAGES,
        validation_alias=AliasChoices('PDF_MAX_TOTAL_PAGES', 'MAX_TOTAL_PAGES'),
    )
    pdf_max_section_pages: int = Field(
        default=10,
        ge=1,
        validation_alias=AliasChoices('PDF_MAX_SECTION_PAGES', 'MAX_SECTION_PAGES'),
    )
    # reportlab invariant mode: fixed timestamps and document id in the output
    pdf_invariant: bool = False

    output_dir: Path = Field(default=Path('./data/pdf'))
    log_level: str = 'INFO'

    def brand_logo_paths(self) -> list[Path]:
        paths: list[Path] = []
        for item in self.brand_logo_candidates.split(','):
            normalized = item.strip()
            if not normalized:
                continue
            paths.append(self.assets_dir / normalized)
        return paths

    def page_limits(self) -> PageLimits:
        return PageLimits(
            max_total_pages=self.pdf_max_total_pages,
            max_section_pages=self.pdf_max_section_pages,
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
