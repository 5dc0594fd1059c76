"""배치 실행 진입점 (cron 등 외부 스케줄러에서 호출)"""
