"""
URL patterns for ledger API endpoints.
"""

from django.urls import path
from . import views

app_name = 'carbon_ledger'

urlpatterns = [
    # Farms and sensors
    path('farms/', views.register_farm, name='register_farm'),
    path('farms/<str:farm_id>/', views.farm_detail, name='farm_detail'),
    path('farms/<str:farm_id>/verify/', views.verify_farm, name='verify_farm'),
    path('farms/<str:farm_id>/incentives/', views.farm_incentive_payments, name='farm_incentive_payments'),
    path('sensors/', views.register_sensor, name='register_sensor'),
    path('sensors/<str:sensor_id>/', views.sensor_detail, name='sensor_detail'),
    path('sensors/<str:sensor_id>/deactivate/', views.deactivate_sensor, name='deactivate_sensor'),
    path('sensors/<str:sensor_id>/calibrate/', views.calibrate_sensor, name='calibrate_sensor'),

    # Measurements
    path('measurements/sensor/', views.record_sensor_measurement, name='record_sensor_measurement'),
    path('measurements/satellite/', views.record_satellite_measurement, name='record_satellite_measurement'),
    path('measurements/<str:measurement_id>/', views.measurement_detail, name='measurement_detail'),
    path('measurements/<str:measurement_id>/verify/', views.verify_measurement, name='verify_measurement'),

    # Credits
    path('credits/', views.issue_credits, name='issue_credits'),
    path('credits/available/', views.list_available_credits, name='list_available_credits'),
    path('credits/<str:credit_id>/', views.credit_detail, name='credit_detail'),
    path('pricing/', views.update_price, name='update_price'),

    # Buyers and marketplace
    path('buyers/', views.register_buyer, name='register_buyer'),
    path('buyers/<str:buyer>/', views.buyer_detail, name='buyer_detail'),
    path('buyers/<str:buyer>/verify/', views.verify_buyer, name='verify_buyer'),
    path('purchases/', views.purchase_credits, name='purchase_credits'),
    path('transactions/<str:transaction_id>/', views.transaction_detail, name='transaction_detail'),

    # Practices and incentives
    path('practices/', views.verify_farming_practice, name='verify_farming_practice'),
    path('practices/<str:verification_id>/', views.practice_verification_detail, name='practice_verification_detail'),
    path('incentives/', views.issue_incentive_payment, name='issue_incentive_payment'),

    # Statistics
    path('stats/platform/', views.platform_statistics, name='platform_statistics'),
    path('stats/marketplace/', views.marketplace_statistics, name='marketplace_statistics'),
]
