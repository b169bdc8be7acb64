# -*- coding: utf-8 -*-
"""
Rate limiting monitoring and statistics tracking for OneDrive operations.

This module provides classes for monitoring Graph API rate limits and tracking
upload statistics.
"""

from .utils import is_debug_metadata_enabled


class RateLimitMonitor:
    """
    Monitor and track Graph API rate limiting metrics.

    Analyzes response headers to detect and track throttling:
    - x-ms-throttle-limit-percentage: Utilization percentage (0.8-1.8 range)
    - x-ms-resource-unit: Resource units consumed per request
    - x-ms-throttle-scope: Throttling scope details

    Headers only appear when >80% of limit consumed.
    """

    def __init__(self):
        """Initialize rate limit monitoring metrics"""
        self.metrics = {
            'total_requests': 0,
            'throttled_requests': 0,
            'average_throttle_percentage': 0.0,
            'max_throttle_percentage': 0.0,
            'resource_units_consumed': 0,
            'alerts_triggered': 0
        }
        self.throttle_threshold = 0.8  # Alert when >80% of limit

        self.request_types = {
            'GET': 0,
            'POST': 0,
            'PUT': 0,
            'PATCH': 0,
            'DELETE': 0
        }

        self.operations = {
            'upload_range': 0,          # PUT to an upload session URL
            'file_upload': 0,           # PUT to /content endpoint
            'upload_session': 0,        # POST createUploadSession
            'item_delete': 0,           # DELETE drive item
            'item_update': 0,           # PATCH rename/move
            'item_copy': 0,             # POST /copy
            'link_create': 0,           # POST /createLink
            'folder_create': 0,         # POST /children
            'children_list': 0,         # GET /children
            'content_download': 0,      # GET /content
            'item_get': 0,              # GET drive item metadata
            'drive_get': 0,             # GET drive metadata
            'other': 0
        }

    def analyze_response_headers(self, response, method=None, url=None):
        """
        Analyze Graph API response headers for rate limiting info.

        Args:
            response: requests.Response object from Graph API call
            method (str): HTTP method (GET, POST, PUT, PATCH, DELETE)
            url (str): Request URL for operation type detection

        Returns:
            dict: Rate limiting information extracted from headers
        """
        self.metrics['total_requests'] += 1

        if method and method.upper() in self.request_types:
            self.request_types[method.upper()] += 1

        if url and method:
            self._categorize_operation(url, method.upper())

        headers = response.headers
        throttle_percentage = headers.get('x-ms-throttle-limit-percentage')
        resource_unit = headers.get('x-ms-resource-unit')
        throttle_scope = headers.get('x-ms-throttle-scope')

        if throttle_percentage:
            percentage = float(throttle_percentage)
            self.metrics['max_throttle_percentage'] = max(
                self.metrics['max_throttle_percentage'],
                percentage
            )

            current_avg = self.metrics['average_throttle_percentage']
            total_requests = self.metrics['total_requests']
            self.metrics['average_throttle_percentage'] = (
                ((current_avg * (total_requests - 1)) + percentage) / total_requests
            )

            if percentage >= 1.0:
                self.metrics['throttled_requests'] += 1
                print(f"[!] THROTTLING DETECTED: {percentage:.1%} of limit used")

                if throttle_scope:
                    print(f"[!] Throttle scope: {throttle_scope}")

            elif percentage >= self.throttle_threshold:
                self.metrics['alerts_triggered'] += 1
                print(f"[ ] Rate limit warning: {percentage:.1%} of limit used")

        if resource_unit:
            units = int(resource_unit)
            self.metrics['resource_units_consumed'] += units
            if is_debug_metadata_enabled():
                print(f"[=] Resource units consumed: {units}")

        return {
            'throttle_percentage': float(throttle_percentage) if throttle_percentage else None,
            'resource_unit': int(resource_unit) if resource_unit else None,
            'throttle_scope': throttle_scope,
            'is_throttled': response.status_code == 429
        }

    def _categorize_operation(self, url, method):
        """
        Categorize API operation based on URL pattern and HTTP method.

        Args:
            url (str): Request URL
            method (str): HTTP method (GET, POST, PUT, PATCH, DELETE)
        """
        url_lower = url.lower()
        path = url_lower.split('?', 1)[0]

        # Upload session URLs live outside the Graph API version root
        if method == 'PUT' and '/v1.0/' not in path and '/beta/' not in path:
            self.operations['upload_range'] += 1
        elif method == 'PUT' and path.endswith('/content'):
            self.operations['file_upload'] += 1
        elif method == 'POST' and path.endswith('/createuploadsession'):
            self.operations['upload_session'] += 1
        elif method == 'DELETE':
            self.operations['item_delete'] += 1
        elif method == 'PATCH':
            self.operations['item_update'] += 1
        elif method == 'POST' and path.endswith('/copy'):
            self.operations['item_copy'] += 1
        elif method == 'POST' and path.endswith('/createlink'):
            self.operations['link_create'] += 1
        elif method == 'POST' and path.endswith('/children'):
            self.operations['folder_create'] += 1
        elif method == 'GET' and path.endswith('/children'):
            self.operations['children_list'] += 1
        elif method == 'GET' and path.endswith('/content'):
            self.operations['content_download'] += 1
        elif method == 'GET' and ('/items/' in path or '/root' in path or '/special/' in path
                                  or path.endswith('/recent') or path.endswith('/sharedwithme')):
            self.operations['item_get'] += 1
        elif method == 'GET' and (path.endswith('/drive') or path.endswith('/drives') or '/drives/' in path):
            self.operations['drive_get'] += 1
        else:
            self.operations['other'] += 1

    def get_metrics_summary(self):
        """
        Get comprehensive rate limiting metrics.

        Returns:
            dict: Summary of all rate limiting metrics
        """
        return {
            'total_requests': self.metrics['total_requests'],
            'throttled_requests': self.metrics['throttled_requests'],
            'throttle_rate': self.metrics['throttled_requests'] / max(self.metrics['total_requests'], 1),
            'average_throttle_percentage': self.metrics['average_throttle_percentage'],
            'max_throttle_percentage': self.metrics['max_throttle_percentage'],
            'resource_units_consumed': self.metrics['resource_units_consumed'],
            'alerts_triggered': self.metrics['alerts_triggered']
        }

    def should_slow_down(self):
        """
        Determine if requests should be slowed down proactively.

        Returns:
            bool: True if approaching rate limits (>90% utilization)
        """
        return self.metrics['max_throttle_percentage'] >= 0.9


# Global rate limit monitor instance
rate_monitor = RateLimitMonitor()


def print_rate_limiting_summary():
    """
    Print rate limiting statistics collected during execution.

    Displays request totals, throttling percentages, resource units and the
    per-method and per-operation breakdowns.
    """
    metrics = rate_monitor.get_metrics_summary()

    print("\n" + "="*60)
    print("GRAPH API RATE LIMITING SUMMARY")
    print("="*60)
    print(f"[STATS] API Request Statistics:")
    print(f"   - Total API Requests:       {metrics['total_requests']:>6}")
    print(f"   - Throttled Requests:       {metrics['throttled_requests']:>6} ({metrics['throttle_rate']:.1%})")
    print(f"   - Average Throttle %:       {metrics['average_throttle_percentage']:>6.1%}")
    print(f"   - Max Throttle %:           {metrics['max_throttle_percentage']:>6.1%}")
    print(f"   - Resource Units Used:      {metrics['resource_units_consumed']:>6}")
    print(f"   - Alerts Triggered:         {metrics['alerts_triggered']:>6}")

    if any(rate_monitor.request_types.values()):
        print(f"\n[API] Request Methods:")
        for method, count in rate_monitor.request_types.items():
            if count > 0:
                print(f"   - {f'{method} requests:':<27} {count:>6}")

    if any(rate_monitor.operations.values()):
        print(f"\n[OPS] Operation Types:")
        for op_type, count in rate_monitor.operations.items():
            if count > 0:
                op_name = op_type.replace('_', ' ').title()
                print(f"   - {f'{op_name}:':<27} {count:>6}")

    if metrics['max_throttle_percentage'] >= 1.0:
        print(f"\n[!] WARNING: Hit throttling limits during execution")
    elif metrics['max_throttle_percentage'] >= 0.8:
        print(f"\n[ ] CAUTION: Approached throttling limits")
    else:
        print(f"\n[OK] Stayed within throttling limits")
    print("="*60)


class UploadStatistics:
    """Track upload statistics across simple and session uploads"""

    def __init__(self):
        """Initialize upload statistics"""
        self.stats = {
            'simple_uploads': 0,
            'session_uploads': 0,
            'failed_uploads': 0,
            'ranges_sent': 0,
            'bytes_uploaded': 0,
        }

    def record_range(self, length):
        """Count one range accepted by an upload session."""
        self.stats['ranges_sent'] += 1
        self.stats['bytes_uploaded'] += length

    def print_summary(self):
        """Print final summary report of upload statistics."""
        print(f"[STATS] Upload Statistics:")
        print(f"   - Simple uploads:   {self.stats['simple_uploads']:>6}")
        print(f"   - Session uploads:  {self.stats['session_uploads']:>6}")
        print(f"   - Failed uploads:   {self.stats['failed_uploads']:>6}")
        print(f"   - Ranges sent:      {self.stats['ranges_sent']:>6}")
        print(f"   - Data uploaded:    {format_bytes(self.stats['bytes_uploaded'])}")


def format_bytes(bytes_value):
    """
    Convert bytes to human-readable format.

    Args:
        bytes_value (int): Number of bytes to format

    Returns:
        str: Human-readable string (e.g., "1.5 MB")
    """
    for unit in ['B', 'KB', 'MB', 'GB']:
        if bytes_value < 1024.0:
            return f"{bytes_value:.1f} {unit}"
        bytes_value /= 1024.0
    return f"{bytes_value:.1f} TB"


# Global upload statistics instance
upload_stats = UploadStatistics()
