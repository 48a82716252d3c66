"""Конфигурация Delivery Parser."""
