"""Library specific binding configurations"""
