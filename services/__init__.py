# services -- integrations used by the API and scripts
#
# Modules:
#   documents        -- KYC document requirements, validation, storage
#   payments_service -- Razorpay / Stripe gateway adapters
#   api_client       -- async httpx client for the backend
