from __future__ import annotations


class ChainCacheError(Exception):
    pass


class ConfigError(ChainCacheError):
    pass


class DirectoryError(ChainCacheError):
    def __init__(self, status_code: int, url: str, detail: str = '') -> None:
        message = f'directory request failed status={status_code} url={url}'
        if detail:
            message = f'{message} detail={detail}'
        super().__init__(message)
        self.status_code = status_code
        self.url = url
        self.detail = detail
