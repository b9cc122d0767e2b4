from __future__ import annotations
from dataclasses import dataclass, field, fields
from typing import Any, Dict, List, Optional
import os
import tomllib

DEFAULT_CONFIG_PATH = "docs2pdf.toml"
ENV_PREFIX = "DOCS2PDF_"


@dataclass
class DocsConfig:
    source_name: str = "next-js"
    api_url: str = "https://api.github.com/repos/vercel/next.js"
    repo_url: str = "https://github.com/vercel/next.js.git"
    docs_path: str = "docs"
    cache_file: str = ".store.cache"
    cache_duration: int = 3600  # seconds
    work_dir: str = "work"
    request_timeout: int = 30
    git_timeout: int = 600
    doc_suffixes: List[str] = field(default_factory=lambda: [".md", ".mdx"])
    page_size: str = "A4"
    github_token: str = ""

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> "DocsConfig":
        # env overrides (useful in CI/secrets)
        def env_override(key: str, default):
            return os.getenv(f"{ENV_PREFIX}{key.upper()}", data.get(key, default))

        base = DocsConfig()
        suffixes = env_override("doc_suffixes", base.doc_suffixes)
        if isinstance(suffixes, str):
            suffixes = [s.strip() for s in suffixes.split(",") if s.strip()]
        return DocsConfig(
            source_name=str(env_override("source_name", base.source_name)).strip(),
            api_url=str(env_override("api_url", base.api_url)).rstrip("/"),
            repo_url=str(env_override("repo_url", base.repo_url)),
            docs_path=str(env_override("docs_path", base.docs_path)).strip("/"),
            cache_file=str(env_override("cache_file", base.cache_file)),
            cache_duration=int(env_override("cache_duration", base.cache_duration)),
            work_dir=str(env_override("work_dir", base.work_dir)),
            request_timeout=int(env_override("request_timeout", base.request_timeout)),
            git_timeout=int(env_override("git_timeout", base.git_timeout)),
            doc_suffixes=[s if s.startswith(".") else f".{s}" for s in suffixes],
            page_size=str(env_override("page_size", base.page_size)),
            github_token=str(env_override("github_token", base.github_token)),
        )

    @staticmethod
    def from_toml(path: str) -> "DocsConfig":
        with open(path, "rb") as f:
            data = tomllib.load(f)
        unknown = sorted(set(data) - {f.name for f in fields(DocsConfig)})
        if unknown:
            raise SystemExit(f"Unknown config keys in {path}: {', '.join(unknown)}")
        return DocsConfig.from_dict(data)

    @staticmethod
    def load(path: Optional[str] = None) -> "DocsConfig":
        if path is None:
            if not os.path.exists(DEFAULT_CONFIG_PATH):
                return DocsConfig.from_dict({})
            path = DEFAULT_CONFIG_PATH
        return DocsConfig.from_toml(path)

    def validate(self) -> None:
        missing = [k for k in ["source_name", "api_url", "repo_url", "docs_path", "cache_file", "work_dir"] if not getattr(self, k)]
        if missing:
            raise SystemExit(f"Config is missing required keys: {', '.join(missing)}")
        negative = [k for k in ["cache_duration", "request_timeout", "git_timeout"] if getattr(self, k) < 0]
        if negative:
            raise SystemExit(f"Config keys must not be negative: {', '.join(negative)}")
        if not self.doc_suffixes:
            raise SystemExit("Config key doc_suffixes must list at least one suffix")
