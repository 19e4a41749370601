"""Flex message templates"""
