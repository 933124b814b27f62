"""
캐시 서비스
- 동일 입력에 대한 사주 계산 결과 캐싱
- 메모리 기반 (cachetools TTLCache)
"""
from typing import Optional
from cachetools import TTLCache
import hashlib
import json

from afterschool_saju.config import get_settings


class CacheService:
    """
    계산 결과 캐싱 서비스

    캐시 전략:
    1. 사주 계산 결과: 입력(날짜, 시각, 경도, 대상) 기준 TTL 캐시
    2. ephem 절기 계산: 연도 기준 TTL 캐시 (계산 비용이 큼)
    """

    def __init__(self):
        settings = get_settings()

        self.saju_cache = TTLCache(
            maxsize=settings.cache_max_size,
            ttl=settings.cache_ttl_seconds
        )

        self.solar_term_cache = TTLCache(
            maxsize=256,
            ttl=settings.cache_ttl_seconds
        )

        # 통계
        self._hits = 0
        self._misses = 0

    def _make_key(self, *args) -> str:
        """캐시 키 생성"""
        key_str = json.dumps(args, sort_keys=True, ensure_ascii=False)
        return hashlib.md5(key_str.encode()).hexdigest()

    # ========== 사주 계산 캐시 ==========

    def get_saju(
        self,
        birth_date: str,
        hour: Optional[int],
        minute: int,
        longitude: float,
        subject: str
    ) -> Optional[dict]:
        """사주 계산 결과 캐시 조회"""
        key = self._make_key("saju", birth_date, hour, minute, longitude, subject)
        result = self.saju_cache.get(key)

        if result:
            self._hits += 1
        else:
            self._misses += 1

        return result

    def set_saju(
        self,
        birth_date: str,
        hour: Optional[int],
        minute: int,
        longitude: float,
        subject: str,
        data: dict
    ):
        """사주 계산 결과 캐시 저장"""
        key = self._make_key("saju", birth_date, hour, minute, longitude, subject)
        self.saju_cache[key] = data

    # ========== 절기 캐시 ==========

    def get_solar_terms(self, year: int) -> Optional[list]:
        return self.solar_term_cache.get(self._make_key("solar_terms", year))

    def set_solar_terms(self, year: int, data: list):
        self.solar_term_cache[self._make_key("solar_terms", year)] = data

    # ========== 통계 ==========

    def get_stats(self) -> dict:
        """캐시 통계 조회"""
        total = self._hits + self._misses
        hit_rate = (self._hits / total * 100) if total > 0 else 0

        return {
            "hits": self._hits,
            "misses": self._misses,
            "hit_rate": f"{hit_rate:.1f}%",
            "saju_cache_size": len(self.saju_cache),
            "solar_term_cache_size": len(self.solar_term_cache)
        }

    def clear(self):
        """캐시 초기화"""
        self.saju_cache.clear()
        self.solar_term_cache.clear()
        self._hits = 0
        self._misses = 0


# 싱글톤 인스턴스
cache_service = CacheService()
