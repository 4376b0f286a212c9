"""Glamora utility helpers"""
