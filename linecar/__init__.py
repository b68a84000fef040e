"""
linecar 패키지 루트 모듈.

적외선 라인 추종 / PID 주행 차량의 제어 코어와 하드웨어·통신 어댑터를 노출한다.
"""

__all__ = ["comm", "control", "hardware", "runtime", "utils"]
