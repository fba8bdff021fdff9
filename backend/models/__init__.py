"""
데이터 모델 및 Supabase 연동 패키지
"""
