# gasnet/core/build/config.py
from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

from gasnet.core.models.network import DEFAULT_PRESSURE_DROP_INWC


# ============================================================
# SizingConfig (caída de presión del sistema)
# ============================================================

@dataclass(frozen=True)
class SizingConfig:
    """
    System-wide sizing settings shared by the whole network.
    """
    pressure_drop_inwc: float = DEFAULT_PRESSURE_DROP_INWC
    default_length_ft: float = 10.0

    @staticmethod
    def from_dict(cfg: Dict[str, Any]) -> "SizingConfig":
        drop = cfg.get("pressure_drop_inwc",
               cfg.get("pressure_drop",
               cfg.get("pressuredrop",
               cfg.get("pressureDrop",
               cfg.get("drop_inwc", DEFAULT_PRESSURE_DROP_INWC)))))
        length = cfg.get("default_length_ft", cfg.get("default_length", 10.0))

        out = SizingConfig(
            pressure_drop_inwc=float(drop),
            default_length_ft=float(length),
        )
        out.validate()
        return out

    def validate(self) -> None:
        if not (self.pressure_drop_inwc > 0):
            raise ValueError(f"SizingConfig.pressure_drop_inwc must be > 0 (got {self.pressure_drop_inwc})")
        if not (self.default_length_ft > 0):
            raise ValueError(f"SizingConfig.default_length_ft must be > 0 (got {self.default_length_ft})")


# ============================================================
# AuditConfig (servicio de auditoría narrativa)
# ============================================================

@dataclass(frozen=True)
class AuditConfig:
    """
    Settings of the narrative audit backend.
    """
    model: str = "gpt-4o-mini"
    api_key: Optional[str] = None
    base_url: Optional[str] = None
    temperature: float = 0.3
    timeout_s: float = 30.0

    @staticmethod
    def from_dict(cfg: Dict[str, Any]) -> "AuditConfig":
        out = AuditConfig(
            model=str(cfg.get("audit_model", cfg.get("model", "gpt-4o-mini"))).strip(),
            api_key=cfg.get("api_key") or None,
            base_url=cfg.get("base_url") or None,
            temperature=float(cfg.get("audit_temperature", cfg.get("temperature", 0.3))),
            timeout_s=float(cfg.get("audit_timeout_s", cfg.get("timeout_s", 30.0))),
        )
        out.validate()
        return out

    @staticmethod
    def from_env(env_file: Optional[str | Path] = None) -> "AuditConfig":
        """
        Reads OPENAI_API_KEY, OPENAI_BASE_URL and GASNET_AUDIT_MODEL,
        loading a .env file first when one is given or found in the cwd.
        """
        from dotenv import load_dotenv

        load_dotenv(dotenv_path=env_file, override=False)
        return AuditConfig.from_dict({
            "api_key": os.getenv("OPENAI_API_KEY"),
            "base_url": os.getenv("OPENAI_BASE_URL"),
            "model": os.getenv("GASNET_AUDIT_MODEL", "gpt-4o-mini"),
        })

    def validate(self) -> None:
        if not self.model:
            raise ValueError("AuditConfig.model is empty")
        if not (0.0 <= self.temperature <= 2.0):
            raise ValueError(f"AuditConfig.temperature out of range: {self.temperature}")
        if self.timeout_s <= 0:
            raise ValueError(f"AuditConfig.timeout_s must be > 0 (got {self.timeout_s})")


# ============================================================
# ModelConfig (agregador)
# ============================================================

@dataclass(frozen=True)
class ModelConfig:
    sizing: SizingConfig
    audit: AuditConfig
    version: int = 1

    @staticmethod
    def from_dict(cfg: Dict[str, Any]) -> "ModelConfig":
        out = ModelConfig(
            sizing=SizingConfig.from_dict(cfg),
            audit=AuditConfig.from_dict(cfg),
            version=int(cfg.get("config_version", cfg.get("version", 1))),
        )
        out.validate()
        return out

    def validate(self) -> None:
        if self.version <= 0:
            raise ValueError(f"ModelConfig.version must be > 0 (got {self.version})")

        self.sizing.validate()
        self.audit.validate()
