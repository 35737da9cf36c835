"""
共享包
"""
