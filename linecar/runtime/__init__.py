"""주행 루프 실행 패키지."""
