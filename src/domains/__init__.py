# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Domain services layer for AdaptarIA.

This package contains domain services that encapsulate business logic.
Each domain module provides a service over an AsyncSession; routers
translate the service errors to HTTP responses.

Domains:
    auth: Login, session tokens, password setup and recovery.
    registration: Account creation for every role.
    user: User lookup, profile updates and role transitions.
    institute: Institutes, the tenant boundary.
    course, section, content: Course material and its visibility.
    enrollment: Course membership, kept on both sides.
    student, director: Role-specific listings.
    learning_test: Kolb learning-style test and classifier.
    survey: Satisfaction surveys and their results.
"""
