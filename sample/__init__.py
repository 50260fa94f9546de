"""Sample server exposing people and company contracts through dynapi"""
