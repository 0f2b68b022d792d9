"""apache-modssl tests"""
