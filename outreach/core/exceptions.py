# outreach/core/exceptions.py
"""
Core exceptions - standardized error handling for the outreach wizard.

This module defines all custom exceptions used across the wizard,
its prompt layer and the boundary services, providing consistent
error handling and debugging information.
"""

from typing import Optional, Dict, Any


class OutreachError(Exception):
    """Base exception for all outreach errors"""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        """
        Initialize base exception.

        Args:
            message: Human-readable error message
            details: Optional additional error details
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class WizardFlowError(OutreachError):
    """Errors in step transitions and operations issued in the wrong step"""

    def __init__(
        self,
        message: str,
        current_step: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        """
        Initialize flow error.

        Args:
            message: Error description
            current_step: Wizard step where the error occurred
            details: Additional error context
        """
        super().__init__(message, details)
        self.current_step = current_step

        if current_step is not None:
            self.details['current_step'] = current_step

    def __str__(self) -> str:
        """String representation including step context"""
        base_msg = super().__str__()
        if self.current_step is not None:
            return f"{base_msg} [Step: {self.current_step}]"
        return base_msg


class ValidationError(OutreachError):
    """Errors in input validation (unknown field keys, scenarios, tones)"""

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        value: Optional[Any] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        """
        Initialize validation error.

        Args:
            message: Error description
            field: Field that failed validation
            value: Invalid value
            details: Additional validation context
        """
        super().__init__(message, details)
        self.field = field
        self.value = value

        if field:
            self.details['field'] = field
        if value is not None:
            self.details['value'] = str(value)


class ServiceError(OutreachError):
    """Errors in external service interactions"""

    def __init__(
        self,
        message: str,
        service_name: Optional[str] = None,
        operation: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        """
        Initialize service error.

        Args:
            message: Error description
            service_name: Name of the failing service
            operation: Operation that failed
            details: Additional service context
        """
        super().__init__(message, details)
        self.service_name = service_name
        self.operation = operation

        if service_name:
            self.details['service'] = service_name
        if operation:
            self.details['operation'] = operation


class ConfigurationError(OutreachError):
    """Errors in system configuration and initialization"""

    def __init__(
        self,
        message: str,
        component: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message, details)
        self.component = component

        if component:
            self.details['component'] = component


class PromptError(OutreachError):
    """Errors in prompt management and template processing"""

    def __init__(
        self,
        message: str,
        prompt_type: Optional[str] = None,
        template_vars: Optional[Dict[str, Any]] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message, details)
        self.prompt_type = prompt_type
        self.template_vars = template_vars or {}

        if prompt_type:
            self.details['prompt_type'] = prompt_type
        if template_vars:
            self.details['template_vars'] = template_vars


class GPTServiceError(ServiceError):
    """Specific errors for GPT service interactions"""

    def __init__(
        self,
        message: str,
        model: Optional[str] = None,
        prompt_length: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        """
        Initialize GPT service error.

        Args:
            message: Error description
            model: GPT model that failed
            prompt_length: Length of prompt that failed
            details: Additional GPT context
        """
        super().__init__(message, service_name="GPT", details=details)
        self.model = model
        self.prompt_length = prompt_length

        if model:
            self.details['model'] = model
        if prompt_length:
            self.details['prompt_length'] = prompt_length


class GenerationError(ServiceError):
    """The message generation boundary failed (network or service fault)"""

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message, service_name="MessageGeneration", operation="generate_message", details=details)


class CaptureError(ServiceError):
    """Rendering the message card to an image failed"""

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message, service_name="CardRenderer", operation="render", details=details)
