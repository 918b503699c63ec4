"""Hacker News API client and its token bucket rate limiter."""