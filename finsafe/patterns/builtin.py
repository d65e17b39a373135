"""
Built-in detection tables.

Scam archetypes seen in messages sent to Indian students. Keywords are
matched as lower-cased substrings; for multi-word keywords the first word
alone counts as a partial hit, so outside the loan table first words are
scam-specific ("kyc pan", not "pan card"). Phrases that open with an
everyday word live in SPECIAL_PHRASES, which has no partial rule.
"""

from __future__ import annotations

from finsafe.patterns.registry import CategoryGroup, Pattern, SpecialPhrase


# ============================================================
# SCAM PATTERNS
# ============================================================

SCAM_PATTERNS: tuple[Pattern, ...] = (
    Pattern(
        key="fake_loan_offer",
        name="Fake Loan Offer",
        keywords=(
            "instant loan", "pre-approved", "pre approved", "click here",
            "limited time", "guaranteed approval", "no documents",
            "0% interest", "low interest", "quick loan", "personal loan",
            "loan approved", "loan offer", "loan amount", "immediate loan",
        ),
        explanation=(
            "🚨 FAKE LOAN ALERT! Scammers send fake loan approval messages to "
            "trick people into paying 'processing fees' or sharing personal "
            "information. Real banks NEVER approve loans via SMS without proper "
            "verification."
        ),
        safety_tips=(
            "Never pay any 'processing fees' for loan approvals via SMS",
            "Real banks require proper documentation and in-person verification",
            "Check loan offers by visiting the bank's official website directly",
            "Verify by calling the bank's official customer service number",
            "Never share Aadhaar, PAN, or banking details via SMS links",
        ),
        severity="high",
    ),
    Pattern(
        key="bank_account_suspended",
        name="Fake Account Suspension",
        keywords=(
            "suspended", "blocked", "deactivated", "urgent", "verify now",
            "click to restore", "reactivate account", "suspension notice",
        ),
        explanation=(
            "⚠️ ACCOUNT SUSPENSION SCAM! Banks never suspend accounts via SMS "
            "without prior notice. These messages create fake urgency to trick "
            "you into clicking malicious links."
        ),
        safety_tips=(
            "Never click 'verify account' or 'reactivate' links in SMS",
            "Check your account status by logging into the official banking app or website",
            "Call your bank's official customer service number (from their website)",
            "Enable transaction alerts in your banking app for real notifications",
        ),
        severity="high",
    ),
    Pattern(
        key="kyc_update_scam",
        name="KYC Update Scam",
        keywords=(
            "kyc", "kyc update", "kyc expired", "kyc pending", "kyc incomplete",
            "kyc pan", "aadhaar link",
        ),
        explanation=(
            "📋 KYC SCAM! Fraudsters pose as banks, wallets or telecom operators "
            "and threaten to block your account unless you 'update KYC' through "
            "their link or app. KYC is only ever completed through official "
            "branches, apps or websites."
        ),
        safety_tips=(
            "KYC updates are never done through SMS links or phone calls",
            "Never install screen-sharing apps (AnyDesk, TeamViewer) on request",
            "Update KYC only at the branch or inside the official app",
            "Never share Aadhaar, PAN, or banking details via SMS links",
        ),
        severity="high",
    ),
    Pattern(
        key="otp_fraud",
        name="OTP / PIN Theft",
        keywords=(
            "otp", "otp code", "otp received", "upi pin", "atm pin", "cvv",
            "cvv number",
        ),
        explanation=(
            "🔐 OTP FRAUD! Anyone asking for your OTP, UPI PIN or CVV is trying "
            "to take money out of your account. Banks and payment apps never ask "
            "for these."
        ),
        safety_tips=(
            "Never share OTP, PIN, or password with anyone",
            "You never need a UPI PIN to RECEIVE money",
            "Report OTP requests to your bank and at cybercrime.gov.in",
            "Block and report the sender",
        ),
        severity="high",
    ),
    Pattern(
        key="lottery_prize_scam",
        name="Lottery / Prize Scam",
        keywords=(
            "congratulations", "lottery", "lottery won", "lucky draw",
            "lucky winner", "prize money", "prize claim", "kbc", "winner",
        ),
        explanation=(
            "🎁 PRIZE SCAM! You cannot win a lottery or lucky draw you never "
            "entered. These messages ask for a 'tax' or 'delivery charge' before "
            "releasing a prize that does not exist."
        ),
        safety_tips=(
            "You cannot win a contest you never entered",
            "Never pay tax, GST or delivery charges to claim a prize",
            "KBC and brand lucky draws are not announced over WhatsApp or SMS",
        ),
        severity="high",
    ),
    Pattern(
        key="fake_job_offer",
        name="Fake Job / Work-From-Home Offer",
        keywords=(
            "work-from-home", "part-time job", "telegram task", "task job",
            "task payout", "payout daily",
        ),
        explanation=(
            "💼 JOB SCAM! Offers of easy money for simple online tasks usually "
            "end with a 'registration fee' or a request to deposit money for "
            "higher-paying tasks. Genuine employers never charge you to work."
        ),
        safety_tips=(
            "Genuine employers never ask for registration or joining fees",
            "Check the company on official job portals and its own website",
            "Be wary of tasks that pay for likes, reviews or ratings",
            "Never deposit money to 'unlock' higher-paying tasks",
        ),
        severity="medium",
    ),
    Pattern(
        key="scholarship_scam",
        name="Fake Scholarship",
        keywords=(
            "scholarship approved", "scholarship fee", "scholarship release",
            "laptop scheme",
        ),
        explanation=(
            "🎓 SCHOLARSHIP SCAM! Government and university scholarships are "
            "applied for and paid through official portals such as the National "
            "Scholarship Portal. No genuine scholarship asks you to pay to "
            "receive it."
        ),
        safety_tips=(
            "Check scholarships only on scholarships.gov.in or your college website",
            "Never pay a fee to 'release' a scholarship",
            "Confirm with your college's scholarship or accounts office",
        ),
        severity="medium",
    ),
    Pattern(
        key="investment_fraud",
        name="Investment Fraud",
        keywords=(
            "doubling", "guaranteed returns", "risk-free", "crypto", "bitcoin",
            "trading tips", "invest now", "profit guaranteed", "profit daily",
        ),
        explanation=(
            "📈 INVESTMENT FRAUD! Promises of guaranteed or unusually high "
            "returns are the signature of Ponzi schemes and fake trading groups. "
            "Real investments always carry risk."
        ),
        safety_tips=(
            "No legitimate investment guarantees returns",
            "Check that advisors are SEBI-registered before investing",
            "Avoid Telegram or WhatsApp 'trading tip' groups",
            "If it sounds too good to be true, it probably is",
        ),
        severity="high",
    ),
    Pattern(
        key="upi_payment_scam",
        name="UPI Collect / Refund Scam",
        keywords=(
            "upi collect", "qr code", "qr scan", "refund pending", "cashback",
        ),
        explanation=(
            "💸 UPI SCAM! Scammers send 'collect requests' or QR codes disguised "
            "as refunds or cashback. Approving the request or entering your PIN "
            "sends money OUT of your account."
        ),
        safety_tips=(
            "You never need to scan a QR code or enter a PIN to receive money",
            "Decline unknown UPI collect requests",
            "Check refunds only inside the official app of the merchant",
        ),
        severity="high",
    ),
    Pattern(
        key="authority_impersonation",
        name="Police / Government Impersonation",
        keywords=(
            "cyber crime", "police case", "seized parcel", "arrest warrant",
            "customs", "customs duty",
        ),
        explanation=(
            "🚔 IMPERSONATION SCAM! Fraudsters pose as police, customs or tax "
            "officials and threaten arrest to frighten victims into paying. "
            "There is no such thing as a 'digital arrest' in Indian law."
        ),
        safety_tips=(
            "Police and courts never demand payment over phone or video call",
            "Hang up and call 1930, the national cybercrime helpline",
            "Never transfer money to 'verify' your identity",
        ),
        severity="high",
    ),
)


# ============================================================
# CATEGORY KEYWORDS (score only, +8 per hit)
# ============================================================

CATEGORY_KEYWORDS: tuple[CategoryGroup, ...] = (
    CategoryGroup(
        label="urgency",
        name="Urgency Language",
        keywords=(
            "urgent", "immediately", "act now", "hurry", "expires",
            "expiring", "last chance", "asap", "today only",
            "within 24 hours",
        ),
    ),
    CategoryGroup(
        label="money",
        name="Money Request",
        keywords=(
            "processing fee", "registration fee", "pay now", "transfer",
            "deposit", "advance payment", "bank details", "account number",
            "ifsc",
        ),
    ),
    CategoryGroup(
        label="personal_info",
        name="Personal Data Request",
        keywords=(
            "otp", "upi pin", "pin number", "password", "cvv", "aadhaar",
            "pan number", "date of birth",
        ),
    ),
    CategoryGroup(
        label="reward",
        name="Too-Good-To-Be-True Offer",
        keywords=(
            "free", "gift", "reward", "bonus", "cashback", "offer", "prize",
            "winner",
        ),
    ),
    CategoryGroup(
        label="threat",
        name="Threats and Pressure",
        keywords=(
            "legal action", "arrest", "penalty", "police", "suspended",
            "blocked",
        ),
    ),
)


# ============================================================
# SPECIAL PHRASES
# ============================================================

SPECIAL_PHRASES: tuple[SpecialPhrase, ...] = (
    SpecialPhrase("instant loan", 25, "fake_loan_offer", "Fake Loan Offer"),
    SpecialPhrase("pre approved", 20, "fake_loan_offer", "Fake Loan Offer"),
    SpecialPhrase("no documents", 20, "fake_loan_offer", "Fake Loan Offer"),
    SpecialPhrase("click here", 30, "suspicious_link", "Suspicious Link"),
    SpecialPhrase("urgent", 15, "urgency_scam", "Urgency Scam"),
    SpecialPhrase("guaranteed", 15, "investment_fraud", "Investment Fraud"),
    SpecialPhrase("digital arrest", 25, "authority_impersonation",
                  "Police / Government Impersonation"),
)
