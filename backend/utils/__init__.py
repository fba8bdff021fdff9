"""
날짜 판정, 집계, 합격 확률 계산 패키지
"""
